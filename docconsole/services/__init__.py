"""
Services shared by the controllers.
"""
