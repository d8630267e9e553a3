"""
Signed License Service Django project.
"""
