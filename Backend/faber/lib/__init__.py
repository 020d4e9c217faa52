# faber/lib/__init__.py
