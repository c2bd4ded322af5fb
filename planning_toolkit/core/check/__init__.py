"""Cross-document checks.

Checks never raise for findings: drift and gaps come back as warnings/errors
inside a report, and only missing inputs become an ErrorReport.
"""
