"""
Services - event routing, input mapping and dependency container
"""
