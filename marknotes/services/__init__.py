# Services package init
"""
MarkNotes Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - NoteService: note CRUD, upload import, pagination, HTML rendering
    - UserService: registration and login
    - UploadService: validation of uploaded markdown files
    - MarkdownRenderer: markdown → sanitized HTML
    - GrammarChecker (abstract): interface for grammar providers
    - GrammarBotService: GrammarBot HTTP implementation
"""
