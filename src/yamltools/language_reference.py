"""Reference text for the supported YAML subset, served via the REST API and MCP."""

from __future__ import annotations

LANGUAGE_REFERENCE = """\
# yamltools YAML Subset Reference

yamltools parses a practical subset of YAML: indentation-based ("block")
mappings and sequences, plus single-line flow collections. The document root
is always a mapping.

## 1. Mappings

```yaml
name: John Doe                    # key: value
address:                          # a key with no value opens a nested mapping
  street: 123 Main St
  city: New York
```

Keys are the text before the first colon. Quote keys that contain spaces or
any of {}[],&*#?|<>=!%@`.

## 2. Sequences

```yaml
hobbies:                          # an empty key followed by list items
  - reading
  - coding
tags: [a, b, c]                   # flow sequence (single line, no nesting)
point: {x: 1, y: 2}               # flow mapping (single line, no nesting)
```

List items hold scalars or flow collections. A `key: value` line nested
under list items is rejected as ambiguous.

## 3. Scalars

| Text                    | Type    |
|-------------------------|---------|
| `true`, `false`         | boolean |
| `null`, `~`             | null    |
| `42`, `-7`              | integer |
| `3.14`, `1e5`           | float   |
| `1e999`                 | string (not a finite number) |
| `"quoted"`, `'quoted'`  | string (quotes removed, no escapes) |
| anything else           | string  |

`yes`/`no`/`on`/`off` stay strings here but are booleans for YAML 1.1
parsers; quote them. Quote version numbers (`"1.10"`) and dates.

## 4. Block scalars

```yaml
description: |                    # literal: keeps line breaks
  first line
  second line
summary: >-                       # folded: joins lines with spaces, no final newline
  one long
  sentence
```

A digit after `|` or `>` (`|2`, `|2-`) fixes the content indent, so lines
can keep leading spaces.

## 5. Comments

Full-line comments and trailing ` # comment` text are ignored and are not
reproduced by the formatter.

## Not supported

Anchors and aliases (&, *), tags (!tag), multi-document streams (---),
nested flow collections, and sequences of mappings.
"""
