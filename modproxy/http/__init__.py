# modproxy/http/__init__.py
