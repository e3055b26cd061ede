"""
Eventos de alteração de empresa.

Toda operação que altera uma empresa emite um evento num tópico Kafka, com a
chave = id da empresa (todos os eventos da mesma empresa caem na mesma partição).

Formato:
    {"operation": "company.created", "company": {"id": "...", "name": "...", ...}}

Campos do snapshot além do `id` são omitidos quando vazios (eventos de
patch/delete levam só o id).
"""
from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Protocol

from confluent_kafka import KafkaException, Producer

from company_api.core.errors import PublishError
from company_api.domain import Company

logger = logging.getLogger(__name__)

COMPANY_CREATED = "company.created"
COMPANY_PATCHED = "company.patched"
COMPANY_DELETED = "company.deleted"


@dataclass(frozen=True)
class EventCompany:
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    amount_of_employees: Optional[int] = None
    registered: Optional[bool] = None
    type: Optional[str] = None

    @classmethod
    def snapshot(cls, company: Company) -> "EventCompany":
        return cls(
            id=company.id,
            name=company.name,
            description=company.description,
            amount_of_employees=company.amount_of_employees,
            registered=company.registered,
            type=company.type,
        )


@dataclass(frozen=True)
class CompanyEvent:
    operation: str
    company: EventCompany

    def to_dict(self) -> Dict[str, Any]:
        company = {k: v for k, v in asdict(self.company).items() if v is not None}
        return {"operation": self.operation, "company": company}

    def encode(self) -> bytes:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")

    @property
    def key(self) -> bytes:
        return self.company.id.encode("utf-8")


# -----------------------------
# Contrato: publisher de eventos
# -----------------------------

class CompanyEventPublisher(Protocol):
    def publish(self, event: CompanyEvent) -> None:
        """Levanta PublishError em falha de transporte."""
        ...

    def close(self) -> None:
        ...


class NullCompanyEventPublisher:
    """Publisher padrão quando KAFKA_ENABLED=false: não envia nada."""

    def publish(self, event: CompanyEvent) -> None:
        logger.debug("Kafka disabled, dropping %s for company %s", event.operation, event.company.id)

    def close(self) -> None:
        pass


class KafkaCompanyEventPublisher:
    """
    Publisher Kafka sobre um Producer confluent-kafka compartilhado.

    `publish` bloqueia até o broker confirmar a mensagem ou `timeout_s`
    expirar. Sem retry aqui: quem chama trata PublishError como perda aceitável.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        topic: str,
        timeout_s: float = 5.0,
        linger_ms: int = 10,
        producer: Any = None,
    ):
        self.bootstrap_servers = bootstrap_servers
        self.topic = topic
        self.timeout_s = timeout_s

        if producer is None:
            producer = Producer(
                {
                    "bootstrap.servers": bootstrap_servers,
                    "acks": "1",
                    "linger.ms": linger_ms,
                    # librdkafka desiste junto com o publish
                    "message.timeout.ms": max(int(timeout_s * 1000), linger_ms + 1),
                    # mesma chave => mesma partição (hash estável)
                    "partitioner": "murmur2_random",
                }
            )
            logger.info("Kafka producer created bootstrap_servers=%s topic=%s", bootstrap_servers, topic)
        self._producer = producer

    def publish(self, event: CompanyEvent) -> None:
        delivered = threading.Event()
        outcome: Dict[str, Any] = {}

        def _on_delivery(err, msg) -> None:
            outcome["error"] = err
            delivered.set()

        try:
            self._producer.produce(
                self.topic,
                value=event.encode(),
                key=event.key,
                on_delivery=_on_delivery,
            )
        except (KafkaException, BufferError) as e:
            raise PublishError(str(e)) from e

        deadline = time.monotonic() + self.timeout_s
        while not delivered.is_set():
            left = deadline - time.monotonic()
            if left <= 0:
                raise PublishError(f"delivery not confirmed within {self.timeout_s}s")
            self._producer.poll(min(left, 0.1))

        if outcome.get("error") is not None:
            raise PublishError(str(outcome["error"]))

        logger.debug("Company event delivered operation=%s company_id=%s", event.operation, event.company.id)

    def close(self) -> None:
        if self._producer is None:
            return
        remaining = self._producer.flush(self.timeout_s)
        if remaining:
            logger.warning("Kafka producer closed with %d undelivered messages", remaining)
        self._producer = None
        logger.info("Kafka producer closed")


def build_publisher(settings) -> CompanyEventPublisher:
    """Factory simples: Kafka quando habilitado, senão no-op."""
    if not bool(getattr(settings, "KAFKA_ENABLED", False)):
        return NullCompanyEventPublisher()
    return KafkaCompanyEventPublisher(
        bootstrap_servers=settings.KAFKA_BROKERS,
        topic=settings.KAFKA_TOPIC,
        timeout_s=float(settings.KAFKA_PUBLISH_TIMEOUT_S),
    )
