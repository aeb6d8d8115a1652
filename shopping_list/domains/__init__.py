"""Domain layer (business logic and domain models).

Domain modules should not depend on UI or on the LLM client. The cart is passed
in to the tool functions rather than looked up globally where practical.
"""
