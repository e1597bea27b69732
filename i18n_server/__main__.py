from i18n_server.main import run

run()
