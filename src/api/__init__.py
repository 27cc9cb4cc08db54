"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests (callback OAuth, gatilhos de sync e importação)
- Validar payloads de entrada
- Delegar para os use cases montados pelo bootstrap
- Traduzir exceções tipadas em respostas HTTP

NÃO PODE conter: FSM, regras de normalização/dedup, acesso direto a stores.
"""
