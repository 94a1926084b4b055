"""
Clients for the third-party services the backend delegates to.

- supabase_auth: hosted authentication (GoTrue REST API)
- chat_completion: OpenAI-compatible chat models through pydantic-ai
- geoapify: forward/reverse geocoding and autocomplete
- email: transactional email through SendGrid
"""
