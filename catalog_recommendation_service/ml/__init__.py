"""Text processing and TF-IDF scoring"""
