class Config:

    # =====================
    # Network
    # =====================
    input_size = 2
    hidden_layers = [3]
    output_size = 1

    # Initialisation
    seed = None                     # None seeds from system entropy

    # =====================
    # Training
    # =====================
    epochs = 5000
    batch_size = 4                  # Examples accumulated per apply()
    learning_rate = 1.0             # Multiplies the averaged gradient, 1.0 = unscaled
    shuffle = True
    log_interval = 500              # Epochs between progress log lines

    # =====================
    # Output
    # =====================
    log_path = "out/training.log"
    stats_path = "out/stats.csv"
    model_path = "out/network.lynn"
    plot_path = "out/network.png"
