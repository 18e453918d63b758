"""Search adapter layer — Pluggable connectors for catalog search backends.

Built-in adapters:
  - opensearch: OpenSearch v2+ (fuzzy ``match`` queries)
  - meilisearch: MeiliSearch (typo-tolerant search)

Implement ``SearchIndexClient`` to connect your own search backend.
"""
