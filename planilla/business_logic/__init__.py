# planilla/business_logic/__init__.py
# Managers are imported from their own modules.
