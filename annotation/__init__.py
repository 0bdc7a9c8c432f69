"""Annotation core: tokens, ordered sequences, existence lookup and save negotiation"""
