from web3_tracking.runner import main

main()
