"""
C#-specific passes: Preprocess, Normalize and Annotate, with the operators
they need.
"""
