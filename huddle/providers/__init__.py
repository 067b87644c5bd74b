"""Concrete collaborators: language models, classifier, tracker and transport."""
