import json
import time

import pytest

from company_api.core.errors import PublishError
from company_api.core.settings import Settings
from company_api.events.publisher import (
    COMPANY_CREATED,
    COMPANY_DELETED,
    CompanyEvent,
    EventCompany,
    KafkaCompanyEventPublisher,
    NullCompanyEventPublisher,
    build_publisher,
)


class FakeMessage:
    def __init__(self, topic, key, value):
        self._topic, self._key, self._value = topic, key, value

    def topic(self):
        return self._topic

    def key(self):
        return self._key

    def value(self):
        return self._value


class FakeProducer:
    """Imita confluent_kafka.Producer: callbacks de entrega só rodam no poll()."""

    def __init__(self, error=None, deliver=True):
        self.error = error
        self.deliver = deliver
        self.sent = []
        self._pending = []
        self.flushed = False

    def produce(self, topic, value=None, key=None, on_delivery=None):
        msg = FakeMessage(topic, key, value)
        self.sent.append(msg)
        self._pending.append((on_delivery, msg))

    def poll(self, timeout):
        if not self.deliver:
            time.sleep(timeout)
            return 0
        pending, self._pending = self._pending, []
        for cb, msg in pending:
            cb(self.error, msg)
        return len(pending)

    def flush(self, timeout):
        self.flushed = True
        return 0 if self.deliver else len(self._pending)


def test_event_encoding_full_snapshot(new_company):
    event = CompanyEvent(COMPANY_CREATED, EventCompany.snapshot(new_company(description=None)))

    assert json.loads(event.encode()) == {
        "operation": "company.created",
        "company": {
            "id": "company-123",
            "name": "TechCorp",
            "amount_of_employees": 100,
            "registered": True,
            "type": "Corporations",
        },
    }
    assert event.key == b"company-123"


def test_event_keeps_false_and_zero_fields(new_company):
    event = CompanyEvent(COMPANY_CREATED, EventCompany.snapshot(new_company(registered=False, amount_of_employees=0)))
    company = event.to_dict()["company"]
    assert company["registered"] is False
    assert company["amount_of_employees"] == 0


def test_kafka_publish_keys_by_company_id():
    producer = FakeProducer()
    pub = KafkaCompanyEventPublisher("broker:9092", "company-events", timeout_s=1, producer=producer)

    pub.publish(CompanyEvent(COMPANY_DELETED, EventCompany(id="abc")))

    [msg] = producer.sent
    assert msg.topic() == "company-events"
    assert msg.key() == b"abc"
    assert json.loads(msg.value()) == {"operation": "company.deleted", "company": {"id": "abc"}}


def test_kafka_delivery_error_raises():
    producer = FakeProducer(error="Broker: Leader not available")
    pub = KafkaCompanyEventPublisher("broker:9092", "t", timeout_s=1, producer=producer)

    with pytest.raises(PublishError):
        pub.publish(CompanyEvent(COMPANY_DELETED, EventCompany(id="abc")))


def test_kafka_publish_is_bounded_by_timeout():
    producer = FakeProducer(deliver=False)
    pub = KafkaCompanyEventPublisher("broker:9092", "t", timeout_s=0.05, producer=producer)

    started = time.monotonic()
    with pytest.raises(PublishError):
        pub.publish(CompanyEvent(COMPANY_DELETED, EventCompany(id="abc")))
    assert time.monotonic() - started < 1


def test_kafka_produce_buffer_full_raises():
    class FullProducer(FakeProducer):
        def produce(self, *args, **kwargs):
            raise BufferError("Local: Queue full")

    pub = KafkaCompanyEventPublisher("broker:9092", "t", timeout_s=1, producer=FullProducer())
    with pytest.raises(PublishError):
        pub.publish(CompanyEvent(COMPANY_DELETED, EventCompany(id="abc")))


def test_close_flushes_producer():
    producer = FakeProducer()
    pub = KafkaCompanyEventPublisher("broker:9092", "t", producer=producer)
    pub.close()
    pub.close()
    assert producer.flushed is True


def test_build_publisher_disabled_is_noop():
    cfg = Settings(_env_file=None, KAFKA_ENABLED=False)
    pub = build_publisher(cfg)
    assert isinstance(pub, NullCompanyEventPublisher)
    pub.publish(CompanyEvent(COMPANY_DELETED, EventCompany(id="abc")))


def test_get_publisher_builds_from_injected_settings(monkeypatch):
    from company_api import deps

    seen = []

    def fake_build(cfg):
        seen.append(cfg)
        return NullCompanyEventPublisher()

    monkeypatch.setattr(deps, "_publisher", None)
    monkeypatch.setattr(deps, "build_publisher", fake_build)
    cfg = Settings(_env_file=None, KAFKA_ENABLED=False, KAFKA_TOPIC="other-topic")

    pub = deps.get_publisher(cfg)

    assert isinstance(pub, NullCompanyEventPublisher)
    assert seen == [cfg]
    # singleton: a segunda chamada não reconstrói
    assert deps.get_publisher(cfg) is pub
    assert len(seen) == 1
