"""
DeckLimit services.

Name normalization, card pricing and deck search. Import from the submodules
directly; the models depend on the normalizer.
"""
