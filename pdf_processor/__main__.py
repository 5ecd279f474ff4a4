from pdf_processor.api.main import run

run()
