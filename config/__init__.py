"""Configurações do serviço Limpador."""
