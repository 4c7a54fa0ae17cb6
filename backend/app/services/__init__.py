# Services package init
"""
Hidden Gems Backend — Services Package
=======================================

Services:
    - gem_service.py:  GemService, the five operations on the gems collection
"""
