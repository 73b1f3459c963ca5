"""
Data-access functions, one module per aggregate.
Services go through these rather than building queries inline, so the
booking pipeline can be exercised with the repositories patched out.
"""
