"""
Reporting layer: assessment report assembly, file exports and text output.

Modules:
  summary    : build the JSON-serialisable assessment report dict
  export     : CSV / JSON writers and the flat per-test export adapter
  formatters : plain-text rendering for the CLI
"""
