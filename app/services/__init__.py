"""
Services - domain classification, persistence, mail and the verification workflow.
"""
