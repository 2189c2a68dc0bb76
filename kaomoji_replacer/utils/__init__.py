"""
Вспомогательные модули: конфигурация, логирование, исключения
"""
