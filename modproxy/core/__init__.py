# modproxy/core/__init__.py
