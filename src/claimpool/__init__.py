"""
claimpool — accounting core пула ликвидности с claim-токенами

Депозиторы вносят value в общий пул и получают пропорциональные claim-токены;
держатели claim-токенов погашают их за пропорциональную долю текущего value.
Часть value может временно выводиться во внешний страховой резерв и позже
возвращаться.

Пакеты:
- claimpool.core       : чистая арифметика, доменные модели, контракты
- claimpool.gatekeeper : gates допуска операций (quadrant, capacity, cooldown)
- claimpool.pool       : reference processor, инварианты, replay
"""

__version__ = "0.3.0"
