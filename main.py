import argparse
import sys
from decimal import Decimal

from web3 import Web3

from config import ADDRESS_FILE, load_config
from contracts import MessageStore, Token, Transactor, timestamped_message
from csv_functions import count_records, read_addresses
from errors import EtherTestError
from eth_sender import EthSender
from utils.logger import logger
from web3_functions import check_transaction, web3_connect


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Ethereum JSON-RPC test scripts")
	parser.add_argument("--env-file", default=None, help="путь к .env файлу (по умолчанию ищется .env)")
	subparsers = parser.add_subparsers(dest="command", required=True)

	fund = subparsers.add_parser("fund", help="отправить ETH на все адреса из файла")
	fund.add_argument("--file", dest="address_file", default=None)
	fund.add_argument("--amount-ether", type=Decimal, default=None)
	fund.add_argument("--wait", action="store_true", help="ждать попадания каждой транзакции в блок")

	transfer = subparsers.add_parser("transfer", help="один перевод ETH с ожиданием блока")
	transfer.add_argument("recipient")
	transfer.add_argument("--amount-ether", type=Decimal, default=None)
	transfer.add_argument("--no-wait", action="store_true")

	write_message = subparsers.add_parser("write-message", help="записать сообщение в контракт")
	write_message.add_argument("--message", default=None)
	write_message.add_argument("--contract", default=None)

	read_message = subparsers.add_parser("read-message", help="прочитать сообщение из контракта")
	read_message.add_argument("--contract", default=None)

	transfer_token = subparsers.add_parser("transfer-token", help="перевести токен")
	transfer_token.add_argument("recipient")
	transfer_token.add_argument("--amount", type=int, default=10 ** 18, help="сумма в минимальных единицах токена")
	transfer_token.add_argument("--contract", default=None)
	transfer_token.add_argument("--no-wait", action="store_true")

	count = subparsers.add_parser("count", help="посчитать записи в файле адресов")
	count.add_argument("--file", dest="address_file", default=None)

	return parser.parse_args(argv)


def amount_in_wei(amount_ether):
	if amount_ether is None:
		return None
	return Web3.to_wei(amount_ether, "ether")


def run(args):
	if args.command == "count":
		# для подсчета ключ и RPC не нужны
		file_path = args.address_file or ADDRESS_FILE
		records = count_records(file_path)
		logger.info(f"Записей в {file_path}: {records}")
		return records

	config = load_config(args.env_file, require_key=args.command != "read-message",
						 address_file=getattr(args, "address_file", None))

	if args.command == "fund":
		if args.wait:
			config = config.with_overrides(wait_for_receipt=True)
		addresses = read_addresses(config.address_file)
		logger.info(f"Прочитано адресов из {config.address_file}: {len(addresses)}")
		return EthSender(config).send_to_addresses(addresses, amount_in_wei(args.amount_ether))

	if args.command == "transfer":
		return EthSender(config).transfer(args.recipient, amount_in_wei(args.amount_ether), wait=not args.no_wait)

	web3 = web3_connect(config.rpc_url, config.proxy, config.connect_timeout)

	if args.command == "read-message":
		return MessageStore(web3, args.contract or config.message_contract).read_message()

	transactor = Transactor.from_web3(web3, config.private_key)

	if args.command == "write-message":
		store = MessageStore(web3, args.contract or config.message_contract)
		return store.write_message(transactor, args.message or timestamped_message())

	if args.command == "transfer-token":
		token = Token(web3, args.contract or config.token_contract)
		tx_id = token.transfer(transactor, args.recipient, args.amount)
		if args.no_wait:
			return tx_id
		return check_transaction(web3, tx_id, config.receipt_timeout, config.poll_interval)

	raise ValueError(f"Неизвестная команда: {args.command}")


def main(argv=None):
	print("======== WEB3 | ETHER TEST ========")
	args = parse_args(argv)
	try:
		run(args)
	except (EtherTestError, OSError) as e:
		logger.error(f"Ошибка: {e}")
		return 1
	print("======== WEB3 | ETHER TEST ========")
	return 0


if __name__ == "__main__":
	sys.exit(main())
