"""
services/ - Business Logic Layer
================================
Services apply defaults and validation, then delegate persistence to repositories.
"""
