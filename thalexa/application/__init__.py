"""
Application layer - services, commands and the controller.
"""
