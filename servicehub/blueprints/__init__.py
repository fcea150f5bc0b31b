"""Route blueprints"""
