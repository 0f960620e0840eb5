# Любая из этих ошибок останавливает текущий запуск целиком


class EtherTestError(Exception):
    pass


class ConfigError(EtherTestError):
    pass


class ConnectivityError(EtherTestError):
    pass


class RpcError(EtherTestError):
    pass


class SigningKeyError(EtherTestError):
    pass


class TransactionFailed(EtherTestError):
    def __init__(self, tx_hash, receipt=None):
        self.tx_hash = tx_hash
        self.receipt = receipt
        super().__init__(f"Транзакция {tx_hash} Failed: статус в квитанции 0")


class ConfirmationTimeout(EtherTestError):
    def __init__(self, tx_hash, timeout):
        self.tx_hash = tx_hash
        self.timeout = timeout
        super().__init__(f"Транзакция {tx_hash} не попала в блок за {timeout} сек.")


class DataError(EtherTestError):
    pass
