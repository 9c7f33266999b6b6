"""Hand-written fakes for the external collaborators."""
