"""
Result ingestion: JSON payload import and local/remote result merging.

Modules:
  result_import : parse exported JSON files into validated models
  merge         : combine device-local and server result sets by test id
"""
