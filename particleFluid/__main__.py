from particleFluid.runner import main

main()
