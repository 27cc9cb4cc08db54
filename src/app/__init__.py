"""App — orquestração, casos de uso e infraestrutura do pipeline de agenda.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- use_cases/: casos de uso (autorização, sync, importação)
- services/: normalização, reconciliação e commit (sem IO direto)
- domain/: modelos canônicos (tokens, itens de agenda, resultados)
- infra/: implementações concretas de IO (Google, Redis, Firestore)
- protocols/: contratos/interfaces
- observability/: run_id e contexto de logs

Padrão: app executa; api adapta; fsm governa o vínculo OAuth; utils apoia.
"""
