# faber/utils/__init__.py
