"""Personalized recommendations for the movie/TV catalog."""
