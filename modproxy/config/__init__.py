# modproxy/config/__init__.py
