from funding_crawler.main import main

main()
