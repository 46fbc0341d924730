# planilla/utils/__init__.py
