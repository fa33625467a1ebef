"""
Core document layer: frontmatter codec, hashing, validation, document
parse/serialize and the filesystem-backed store.
"""
