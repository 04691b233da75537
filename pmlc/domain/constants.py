from pathlib import Path

# Inclusion directives
XINCLUDE_NS = "http://www.w3.org/2001/XInclude"
XINCLUDE_TAG = f"{{{XINCLUDE_NS}}}include"
FRAGMENT_ROOT = "fragment"

# Configuration
CONFIG_DIRNAME = ".pml"
CONFIG_FILENAME = "config.yml"

# Build defaults
DEFAULT_SOURCE_DIR = Path("prompts")
DEFAULT_OUTPUT_DIR = Path("build/prompts")
DEFAULT_OUTPUT_EXTENSION = ".md"
SOURCE_GLOB = "*.xml"
MARKDOWN_EXTENSIONS = (".md", ".mdc")

# Rendered headings
ROLE_HEADING = "## Role"
TOC_HEADING = "## Table of contents"
RESTRICTIONS_HEADING = "### Restrictions"
FRONTMATTER_DELIMITER = "---"
