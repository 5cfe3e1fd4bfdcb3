"""
Shield - Resource-Scoped Admin Permissions
==========================================
"""
