"""
Ядро маркетплейса услуг: жизненный цикл заказов и голосования
"""
