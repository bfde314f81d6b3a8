# routes/__init__.py
# HTTP blueprints
