"""Party lookup: resolve a free-form query against the validator registry.

A query can be a full party id (`namespace::fingerprint`), a sponsor id, or a
fragment of either. The resolver answers with one of three shapes:
- `party`: a single cross-referenced party view
- `search_results`: a capped list of fuzzy matches
- `not_found`
"""
