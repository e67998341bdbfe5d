"""
Service layer: credentials, tokens, auth workflows and recipe logic.

Services never touch HTTP request/response objects; routes call them with an
AsyncSession and translate nothing, since every failure is raised as a
RecipeBoxError that the global handlers render.
"""
