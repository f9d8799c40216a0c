from indodax_proxy.api.app import main

main()
