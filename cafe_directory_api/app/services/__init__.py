"""
Service layer.

``cafe_service`` answers read queries, ``cafe_admin_service`` applies
admin writes and ``cafe_assembler`` shapes results for the API.
"""
