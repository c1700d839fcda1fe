"""http routes"""
