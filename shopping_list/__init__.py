"""Shopping list assistant: in-memory cart exposed as LLM tools."""
