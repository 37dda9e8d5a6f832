"""
Input components for dotswarm
"""
