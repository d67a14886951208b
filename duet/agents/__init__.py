from duet.agents.auditor import AuditInput, AuditorAgent
from duet.agents.producer import ProducerAgent

__all__ = ["AuditInput", "AuditorAgent", "ProducerAgent"]
