# modproxy/app/__init__.py
