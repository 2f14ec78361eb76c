"""Editor affordances built on the scanner: braces, completion, formatting, classification, indentation."""
