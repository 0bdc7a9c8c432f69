"""Primary annotation store"""
