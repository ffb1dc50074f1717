"""Loading of MicroLisp source files: the bundled prelude and user scripts."""
