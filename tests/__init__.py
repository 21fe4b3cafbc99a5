# tests\__init__.py
"""
Test Suite for Grammar Lens

Organization:
- engine tests: conjugation, noun phrases, coordination, clauses, notation
  and derivations against the real English lexicon.
- domain tests: the determiner constraint tables and the resolver.
- `test_api_smoke`: the FastAPI surface through TestClient.
"""
